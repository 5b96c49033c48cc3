"""Main window mixins"""
