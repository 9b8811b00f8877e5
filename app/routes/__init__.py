"""HTTP routes exposing the product catalog."""
