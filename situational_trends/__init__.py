"""Situational betting trends: grouping, consensus and ranking."""
