"""Rules engine for the São Tomé Island Farmers board game."""
