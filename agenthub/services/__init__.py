"""Domain services. Each takes a SQLAlchemy session and raises AppError subclasses."""
