from oci_shape_resolver.cli import main

if __name__ == "__main__":
    main()
