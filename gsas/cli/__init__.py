"""GSAS command-line interface"""
