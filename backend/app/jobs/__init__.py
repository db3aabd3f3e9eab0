# app/jobs/__init__.py
"""Standalone jobs meant to be triggered by an external scheduler (cron, k8s CronJob)."""
