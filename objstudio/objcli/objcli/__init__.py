"""objcli: command line front end for libobj."""
