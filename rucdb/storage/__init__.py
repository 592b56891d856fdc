"""Pages, page-level disk file access and the buffer pool."""