"""Route declarations and HTTP trigger normalization."""
