"""
CandleSim – Simulador determinista de velas OHLCV.

Genera una historia reproducible por símbolo y la extiende en tiempo real
simulando ticks, agregándolos en la vela viva y haciendo rollover al
cumplirse la duración del bucket.
"""

__version__ = "0.1.0"
