"""Reports domain - admin monthly stats and partner activity"""
