"""capi2argo command line tool."""
