"""Field, curve and dense polynomial primitives used by the ecfft package."""
