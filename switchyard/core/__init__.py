"""Switchyard dispatch engine — nodes, channels and scheduling."""
