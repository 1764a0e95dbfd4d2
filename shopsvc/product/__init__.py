"""Product domain, SQLite storage, repository and service layers."""