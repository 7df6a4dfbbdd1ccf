"""Pricing domain - plan rates and option surcharges"""
