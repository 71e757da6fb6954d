"""
Dataflow Layer

Tick storage and candle serving. Contains:
- adapters: Redis backend and NATS clients
- persistence: codecs, day-sharded key space, candle store, tick sink
- candle_aggregation: tick to candle aggregation
- query: resolution lookup and range snapping
"""
