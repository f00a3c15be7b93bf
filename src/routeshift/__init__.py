"""Routeshift - migrate a Next.js app from the pages router to the App Router."""

__version__ = "0.1.0"
