"""
Domain services.

Importar directamente desde cada módulo (seed, random_source,
bucket_alignment, history_generator, candle_aggregator, simulator).
"""
