"""Payout domain - partner payout computation and settlement queue"""
