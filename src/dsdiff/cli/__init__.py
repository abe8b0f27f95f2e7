"""dsdiff command line interface."""
