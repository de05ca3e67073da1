"""Command-line interface for comparing iptables-save snapshots."""
