"""User domain - sign-up, roles and customer management"""
