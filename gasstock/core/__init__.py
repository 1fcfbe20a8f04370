"""Core domain layer - entities, interfaces, rules and exceptions."""

from gasstock.core import entities, exceptions, interfaces, rules

__all__ = ["entities", "interfaces", "exceptions", "rules"]
