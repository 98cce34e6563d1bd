"""Core reprojection residual modules."""
