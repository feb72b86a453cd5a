"""Services package for the dashgraph chart engine"""
