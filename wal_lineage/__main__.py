from wal_lineage.cmd import main

if __name__ == '__main__':
    main()
