"""Optional integrations with storage backends."""
