"""Entity components, network ids, spatial indexing, navigation and client view state."""