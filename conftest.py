import matplotlib

# plots are written to files only
matplotlib.use("Agg")
