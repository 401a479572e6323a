"""Lahja vocabulary review engine"""
