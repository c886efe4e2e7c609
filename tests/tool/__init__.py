"""Tests for the capi2argo command line tool."""
