"""Translation core — query compiler, bulk processor, response translator and index metadata."""
