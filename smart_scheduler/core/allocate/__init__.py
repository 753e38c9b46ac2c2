"""Calendar allocation engine.

Turns a sequenced task order into day-by-day hour allocations. Pure and
deterministic for a fixed start date; holds no state between calls.
"""
