"""Infrastructure layer — filesystem discovery and reads.

This is the only layer that touches the disk. Parsers receive
pre-read text and never open files themselves.
"""
