"""
Engine Layer

Configuration and process runtime for the candle store service.
"""
