"""Services for the call booker."""
