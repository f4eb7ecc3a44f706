"""
Forensic Replay
===============
Read-only reconstruction and playback of historical geospatial state.

Packages:
- time:        clock abstraction and UTC helpers
- spatial:     entity, zone and grid-cell domain types
- replay:      data source, frame reconstruction and the replay engine
- playback:    timeline controller, scheduling and control surface
- policy:      forensic mode policy and time-context validation
- audit_store: Django persistence for the append-only history
"""
