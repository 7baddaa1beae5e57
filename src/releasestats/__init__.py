"""Release cadence statistics for GitHub repositories."""
