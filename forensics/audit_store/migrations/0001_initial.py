from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="EntityPositionRecord",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("entity_id", models.CharField(max_length=255)),
                (
                    "entity_kind",
                    models.CharField(
                        choices=[
                            ("vehicle", "Vehicle"),
                            ("driver", "Driver"),
                            ("asset", "Asset"),
                        ],
                        max_length=20,
                    ),
                ),
                ("lat", models.FloatField()),
                ("lng", models.FloatField()),
                (
                    "cell_index",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Grid cell (H3 index) containing the sample.",
                        max_length=32,
                    ),
                ),
                (
                    "recorded_at",
                    models.DateTimeField(
                        help_text="When the sample was taken at source.",
                    ),
                ),
                ("metadata", models.JSONField(blank=True, default=dict)),
            ],
            options={
                "db_table": "forensics_entity_positions",
                "ordering": ["recorded_at", "id"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["recorded_at"],
                        name="idx_fpos_recorded",
                    ),
                    models.Index(
                        fields=["entity_id", "recorded_at"],
                        name="idx_fpos_entity_recorded",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ZoneAuditRecord",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("zone_id", models.CharField(max_length=255)),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("created", "Created"),
                            ("updated", "Updated"),
                            ("deactivated", "Deactivated"),
                            ("tagged", "Tagged"),
                        ],
                        max_length=20,
                    ),
                ),
                ("occurred_at", models.DateTimeField()),
                ("before", models.JSONField(blank=True, null=True)),
                ("after", models.JSONField(blank=True, null=True)),
                ("user_id", models.CharField(max_length=255)),
            ],
            options={
                "db_table": "forensics_zone_audit_log",
                "ordering": ["occurred_at", "id"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["occurred_at"],
                        name="idx_fzone_occurred",
                    ),
                    models.Index(
                        fields=["zone_id", "occurred_at"],
                        name="idx_fzone_zone_occurred",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="GeoEventRecord",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("event_id", models.CharField(max_length=255, unique=True)),
                (
                    "event_type",
                    models.CharField(blank=True, default="", max_length=100),
                ),
                ("occurred_at", models.DateTimeField()),
                ("payload", models.JSONField(blank=True, default=dict)),
            ],
            options={
                "db_table": "forensics_geo_events",
                "ordering": ["occurred_at", "id"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["occurred_at"],
                        name="idx_fevt_occurred",
                    ),
                ],
            },
        ),
    ]
