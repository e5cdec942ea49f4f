"""Service layer — ServiceResult-returning operations used by the CLI."""
