"""Run the capi2argo command line tool."""

from capi2argo.tool.capi2argo import main

if __name__ == "__main__":
    main()
