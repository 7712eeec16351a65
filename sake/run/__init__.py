"""Clients that run commands on the local machine or on remote servers over SSH."""