"""Host-side input capture modules."""
