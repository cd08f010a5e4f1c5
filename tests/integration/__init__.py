"""Integration tests exercising the daemon together with the decoder."""
