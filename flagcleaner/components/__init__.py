"""flagcleaner components - File access, file search and the Objective-C text transform."""
