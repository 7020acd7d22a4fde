"""
Engine layer: the generational loop (``moevo.engine.algorithm.loop``) and the
shared building blocks under ``moevo.engine.algorithm.components``.
"""
