"""Core model, staged import pipeline and shared infrastructure."""
