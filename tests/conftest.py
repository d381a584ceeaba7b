import os

# Headless backend for every test that draws figures.
os.environ.setdefault("MPLBACKEND", "Agg")
