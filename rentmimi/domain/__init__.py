"""Domain packages: one per business area, each with schemas, service and router"""
