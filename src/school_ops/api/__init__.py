"""HTTP API over the procurement and payroll engines."""
