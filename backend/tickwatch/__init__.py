"""Incremental indicator engine and strategy-condition evaluator.

This package contains pure business logic with no I/O dependencies
(no network, files or databases).  Ticks and configuration go in;
indicator snapshots, condition vectors and signals come out.  The
tickwatch_app package wires it to settings, logging and tick sources.
"""
