"""Core training logic: progression, session engine, rehab, pain and filler selection."""
