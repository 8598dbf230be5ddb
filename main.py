from KML_Deduplicator.main import main

if __name__ == "__main__":
    main()
