import matplotlib

# No display in the test environment.
matplotlib.use("Agg")
