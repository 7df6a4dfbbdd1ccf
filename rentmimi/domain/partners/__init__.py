"""Partner domain - applications, roster management and availability search"""
