"""NFS filesystem semantics probe suite."""
