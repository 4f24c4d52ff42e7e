"""
Sensor Ingest Backend
=====================

HTTP endpoint that stores telemetry readings from embedded devices.

HOW IT'S ORGANIZED:
------------------
- config.py  = Settings from environment variables
- models/    = Data structures (a Reading, the error kinds)
- utils/     = Payload parsing and field coercion
- services/  = Database writer
- routers/   = The ingest endpoint
- main.py    = Puts it all together and starts the server
"""

__version__ = "1.0.0"
