"""Nurture forum: the social layer of the Nurture parenting application."""

__version__ = "0.3.0"
