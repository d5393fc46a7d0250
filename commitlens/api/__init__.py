"""HTTP API for CommitLens."""
