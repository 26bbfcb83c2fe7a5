"""HTTP service layer for eventcal."""
