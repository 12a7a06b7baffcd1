"""Classification, normalization and orchestration services."""
