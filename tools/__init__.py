"""MCP tool registration for the portfolio gallery server"""
